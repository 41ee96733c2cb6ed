"""fs_sources - An async client for FamilySearch sources, source references and notes.

Wraps the FamilySearch REST API and stitches the returned GEDCOM X envelopes
into typed objects with their cross-references resolved.

Components:
- transport: httpx-based HTTP plumbing
- schemas: typed wrappers over GEDCOM X fragments
- factory: wrapper construction from raw JSON
- sources: cross-reference resolver and source operations
- notes: note operations
- users: current user lookup
"""
