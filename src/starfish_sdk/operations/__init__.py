"""Resource operations for the Starfish API.

Each operation authenticates through the token manager and then performs one
request:
- ``common``: Shared context, authenticated request helpers and paging
- ``devices``: Device listing, creation and deletion
- ``observations``: Observation listing, posting and next-page traversal
- ``templates``: Solution and static device templates
"""
