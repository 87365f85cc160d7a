"""Tokenizer, parser and evaluator of the nytric language."""
