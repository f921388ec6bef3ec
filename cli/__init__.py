"""
CLI tools for B2 backups.

Available commands:
- python -m cli.backup   : Upload an archive to a Backblaze B2 bucket
"""
