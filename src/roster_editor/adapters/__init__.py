"""Host adapters for the editor session."""
