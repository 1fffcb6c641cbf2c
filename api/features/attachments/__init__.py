"""Attachment storage: writes uploaded files under the upload root and labels their size."""
