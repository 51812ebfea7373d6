"""UI-side glue: controllers and the Tk scheduler adapter."""
