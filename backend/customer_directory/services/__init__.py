"""Service layer: use-case orchestration on top of repositories and units of work.

Import concrete services from their subpackages
(:mod:`customer_directory.services.customers`,
:mod:`customer_directory.services.auth`); this module stays import-light so
repositories can depend on :mod:`customer_directory.services._shared.errors`.
"""
