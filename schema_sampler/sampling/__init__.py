# ==============================================
# TOPIC 1: SAMPLING
# ==============================================
#
# This package decides how many documents to examine and pulls
# that many raw documents out of the document store.
#
# Modules:
# --------
# - sampler.py → compute_sample_size() + Sampler
#
# ==============================================

from .sampler import Sampler, compute_sample_size

__all__ = ["Sampler", "compute_sample_size"]
