"""Users app package.

Defines the custom user model shared by every other app. A user is a
customer, a host publishing bookable time windows, or a platform admin.
Hosts carry a public profile slug, display prices and the timezone in
which their availability windows are interpreted. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout the
project.
"""
