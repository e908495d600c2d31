# manifest_data/__init__.py
# Bundled save-location database (manifest.yaml), read by manifest_db.
