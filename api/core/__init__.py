"""
Shared building blocks: environment settings, database URL resolution,
and the database client. Entity tables and queries live in their feature
package (e.g. `posts/`).
"""
