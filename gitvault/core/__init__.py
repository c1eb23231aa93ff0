"""Core object model machinery: codec, store, builder, assembler."""
