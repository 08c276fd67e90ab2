"""LLM text helpers for the Model UN position paper writer."""
