"""
Pydantic models for input validation
"""

import os
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from config.config import BITCOIN_DATADIR, DEFAULT_NETWORK, NETWORKS, PROGRESS_EVERY


class ScanRequest(BaseModel):
    network: str = Field(DEFAULT_NETWORK, description="One of main, test, signet, regtest")
    datadir: str = Field(BITCOIN_DATADIR, min_length=1, description="Bitcoin data directory")
    files: Optional[List[str]] = Field(None, description="Explicit block files, overrides discovery")
    output: Optional[str] = Field(None, description="JSON lines output path, '-' for stdout")
    include_transactions: bool = True
    progress_every: int = Field(PROGRESS_EVERY, ge=1)
    metrics_port: Optional[int] = Field(None, ge=1, le=65535)

    @field_validator('network')
    @classmethod
    def validate_network(cls, v):
        if v not in NETWORKS:
            raise ValueError(f'Unsupported network "{v}", expected one of {", ".join(NETWORKS)}')
        return v

    @field_validator('datadir')
    @classmethod
    def expand_datadir(cls, v):
        return os.path.expanduser(v)

    @field_validator('files')
    @classmethod
    def validate_files(cls, v):
        if v is None:
            return v
        if not v:
            raise ValueError('At least one block file is required')
        missing = [f for f in v if not os.path.isfile(f)]
        if missing:
            raise ValueError(f'Block files not found: {", ".join(missing)}')
        return v
