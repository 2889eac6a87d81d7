"""
RRT — Registrar verification tokens.

Architecture: Detector (version + length) → Builder (dispatch) → Token variant (parse + checksum)
Philosophy:  A token either decodes exactly, or it is rejected with the check that failed.
"""

__version__ = "0.1.0"
