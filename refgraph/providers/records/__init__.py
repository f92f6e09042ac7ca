"""Record sources for the matrix and author datasets.

CSVFileSource reads a local file; HTTPCSVSource downloads one with httpx.
Both return header-keyed string records and raise LoadFailure on any
read or parse error.
"""

from refgraph.providers.records.csv_file_source import CSVFileSource, parse_csv_text
from refgraph.providers.records.http_csv_source import HTTPCSVSource

__all__ = ["CSVFileSource", "HTTPCSVSource", "parse_csv_text"]
