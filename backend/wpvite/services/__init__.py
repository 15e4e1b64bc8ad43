# Services package init
"""
WPVite Backend — Services Layer
=================================

What:  Business rules between the API handlers and the database.
How:   Stateless classes with a module-level singleton each; every method
       takes the request's AsyncSession as its first argument.

Service Inventory:
    - PostService:       post CRUD, slugs, paginated listing
    - UserService:       admin accounts and the OAuth login decision
    - MediaService:      media library rows, backed by FileService
    - FileService:       upload validation and local file storage
    - OptionService:     site options and the first-run setup
    - SiteService:       read-only queries for the public pages and sitemap
    - GoogleOAuthClient: code exchange and userinfo against Google
"""
