"""Import package.

Turns mapping spreadsheets into ``RelationshipRecord`` lists.  Source
profiles (which column feeds which field, which sheet to read) live in
``config/sources/*.yaml`` and are loaded into ``ImportConfig`` objects.
"""
