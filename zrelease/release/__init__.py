"""Release orchestration for Zulip Server.

- version: version grammar and branch rules
- repo_state: clean tree and release commit
- gates: provision/lint/docs/spelling gates
- metadata: changelog date, version.py fields, feature level
- changelog: release notes extraction
- publish: tag, tarball, upload, push, GitHub release
- orchestrator: the whole run, in order
"""

from __future__ import annotations
