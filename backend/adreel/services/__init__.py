"""
Services package

- integrations: remote design / voiceover collaborators
- pipeline: media assembly and the creative pipeline
- infrastructure: export jobs, lifecycle and storage
- use_cases: business operations used by the routes
"""
