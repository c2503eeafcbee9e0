"""
Pipeline stages for StackDigest.

Load job:
- Source Parser (ingestion)
- Record Normalizer (normalization)
- Ranked Selector (selection)
- Bulk Loader (loading)

Report job:
- Analytics Queries (analytics)
- Report Renderer (reporting)
"""
