"""Model provider clients (chat completion, embeddings) and output parsing."""
