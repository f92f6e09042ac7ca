"""Abstract contracts for the engine's external inputs.

    Interface       ->  Concrete implementations (in refgraph/providers/)
    ---------------------------------------------------------------------
    IRecordSource   ->  CSVFileSource, HTTPCSVSource
"""

from refgraph.interfaces.record_source import IRecordSource

__all__ = ["IRecordSource"]
