"""Release bounded context.

- domain: version policy, diffing and changelog aggregation (pure)
- resolve: picking previous releases and release candidates
- flow: use-case sequencing (fetch, changelog, notes, draft, bump)
- view: Markdown and console presentation
- infra: gh / ocm / git adapters
"""

from __future__ import annotations
