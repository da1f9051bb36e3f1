"""
Ingestion — change detection and the load → split → embed → upsert pipeline.

This package decides which topic directories of a corpus changed since
their last successful ingestion, and re-ingests only those: PDFs are
loaded page by page, split into overlapping chunks, grouped into bounded
upsert batches, and written to one vector-index namespace per directory.
"""
