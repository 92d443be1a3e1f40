"""Provider configuration modules, loaded through deployunit.config_loader."""
