from __future__ import annotations

from .models import ProductRecord
from .pipeline import Pipeline, PipelineState, RandomShuffler

__all__ = ["Pipeline", "PipelineState", "ProductRecord", "RandomShuffler"]
