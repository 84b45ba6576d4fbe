"""Navigator Profiles Meta information.
   Navigator Profiles keeps password-gated, encrypted user profiles.
"""
__title__ = 'navigator_profiles'
__description__ = (
   'Navigator Profiles keeps a set of encrypted profiles '
   'unlocked at runtime by a user password.'
)
__version__ = '0.1.0'
__copyright__ = 'Copyright (c) 2023 Jesus Lara'
__author__ = 'Jesus Lara'
__author_email__ = 'jesuslarag@gmail.com'
__license__ = 'Apache-2.0'
__url__ = 'https://github.com/phenobarbital/navigator-profiles'
