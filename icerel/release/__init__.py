"""Release-candidate pipeline.

- trigger: resolve the CI event into a tagged trigger variant
- validate: tag parsing and explicit input validation
- metadata / consistency: declared project version gate
- build: per-channel, per-platform build plans
- bundles: artifact bundle naming, upload and merge
- workflow: job graph and GitHub Actions rendering
"""

from __future__ import annotations
