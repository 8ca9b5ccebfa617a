from __future__ import annotations

# gh api reads and release creation
GH_TIMEOUT_SECONDS = 60.0

# ocm descriptor and version listing; the registry can be slow to page
OCM_TIMEOUT_SECONDS = 120.0

# local git (rev-parse, show)
GIT_TIMEOUT_SECONDS = 30.0

# Idempotent read retry policy (gh and ocm)
READ_RETRY_ATTEMPTS = 3
READ_RETRY_DELAY_SECONDS = 1.0
