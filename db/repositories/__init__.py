"""Repository layer for the job board API.

Provides the organization aggregate operations:
- organizations: get_organization_paginated_list, get_organization,
                 create_organization, update_organization, delete_organization
- contact_points: reconcile, insert_for_organization, compute_deletion_set
"""
