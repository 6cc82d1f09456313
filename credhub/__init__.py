"""
Credential Hub
A multi-tenant credential platform for learners, institutions and employers.

Architecture:
- MongoDB: every entity (users, institutions, credentials, jobs, portfolios...)
- Hugging Face models: skill extraction, NSQF prediction, career guidance
  (always with a deterministic fallback, AI never blocks a request)
- JWT: bearer auth with role-gated routers
"""

__version__ = "1.0.0"
