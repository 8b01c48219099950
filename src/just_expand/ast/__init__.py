"""AST types for just-expand."""
