"""
Core Package.

Contains the conversion pipeline:
- Section splitting and fact extraction
- Grammar helpers (tree-sitter)
- Transformer registry, orchestration and merge
- Codegen assembly
"""
