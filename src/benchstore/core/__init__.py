"""Core domain: record model, merge policy and the entry store facade."""
