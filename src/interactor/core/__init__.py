"""Core types shared by contexts and the interactor pipeline."""
