"""Derived holding records synthesized from 852 location markers."""

from marcimport.holdings.synthesizer import SYNTHETIC_RECORD_TYPE, synthesize_holdings

__all__ = ["SYNTHETIC_RECORD_TYPE", "synthesize_holdings"]
