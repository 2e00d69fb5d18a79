"""Search Console indexing auditor."""
