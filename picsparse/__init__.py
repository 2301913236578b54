# picsparse — Embedded Image Extraction Engine
# Pure-Python signature carving of JPEG / PNG / GIF from opaque containers.
#
# Architecture (bottom → top):
#   signatures    — Static header/footer table (JPEG, PNG, GIF87a, GIF89a)
#   scanner       — Find every header occurrence in a byte buffer
#   boundary      — Resolve where each embedded image ends
#   dimensions    — Width/height from headers without full decode
#   smart_filter  — Minimum size / dimension gate
#   extractor     — Buffer-level pipeline (scan → resolve → measure → filter)
#   manager       — File & directory front-end (read, save, report)
#   parallel      — Multiprocessing support for directory batches

__version__ = "0.1.0"
