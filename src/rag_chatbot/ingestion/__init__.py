"""
Ingestion — PDF loading, chunking, and embedding into the vector store.

Turns the PDFs of the documents directory into ``document_chunks`` rows
via :class:`~rag_chatbot.ingestion.processor.DocumentProcessor`.
"""
