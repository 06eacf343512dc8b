"""
Version 1 of the API.

All routes of this version live under ``/api/v1/plugins/lecturer`` so
that they match the paths used by the forum plugin UI.
"""
