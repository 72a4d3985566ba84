"""Daily labor report package.

Organized by feature modules (catalogs, labor, reports, absences, ...) with a
thin Flask controller layer over service/repository layers backed by a
document store.
"""
