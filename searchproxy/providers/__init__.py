"""
Outbound collaborators of the search proxy.

1. EmbeddingClient: dense embeddings (OpenAI) and sparse embeddings (Pinecone inference)
2. IndexClient: similarity queries against a Pinecone index host
"""
