"""Report ingestion.

This module downloads the LoTW ADIF report, splits it into records,
decodes tagged fields, and runs complete fetch cycles.
"""
