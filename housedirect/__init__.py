"""HouseDirect marketplace backend: verification, disputes and lead CRM."""
