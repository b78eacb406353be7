"""FASTQ read records, overlap merging, polyG/polyX trimming, option validation and statistics."""

__version__ = "0.1.0"