"""Session guards for the pickletrack blueprints.

Sign-in itself is handled by the hosted auth service; the session only
carries the resulting ``user_id`` and ``is_admin`` flag.
"""
