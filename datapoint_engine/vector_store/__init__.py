# vector_store/__init__.py

from .pinecone_index import index_datapoints, init_pinecone_index

__all__ = ["init_pinecone_index", "index_datapoints"]
