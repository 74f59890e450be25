# ==============================================
# Schema Sampler
# ==============================================
#
# Package Structure (4 Topics + Orchestrator):
#
# schema_sampler/
# ├── sampling/         # Topic 1: Size the sample, pull raw documents
# ├── extraction/       # Topic 2: Turn one document into a (field, type) shape
# ├── aggregation/      # Topic 3: Unify keys, complete, dedupe, aggregate, merge
# ├── storage/          # Topic 4: MongoDB document store + server-side pipeline
# ├── config.py         # Configuration management
# ├── errors.py         # Typed error taxonomy
# ├── schema_inference.py  # Final orchestrator class
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
