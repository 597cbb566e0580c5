"""Formula Calculator: parse, evaluate and typeset single-line formulas."""
