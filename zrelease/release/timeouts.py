from __future__ import annotations

# gh queries and release creation (the tarball upload to GitHub is the slow part)
GH_TIMEOUT_SECONDS = 60.0
GH_RELEASE_TIMEOUT_SECONDS = 15 * 60.0

# tools/provision can rebuild the whole venv and node_modules
PROVISION_TIMEOUT_SECONDS = 60 * 60.0

# lint, documentation and spelling gates
GATE_TIMEOUT_SECONDS = 30 * 60.0

# tools/build-release-tarball and tools/upload-release
BUILD_TIMEOUT_SECONDS = 60 * 60.0
UPLOAD_TIMEOUT_SECONDS = 30 * 60.0
