"""cal core: numbers, AST, parser and evaluator."""
