"""Optional arcade front-end; import ``torchlight.app.arcade_app`` explicitly."""
