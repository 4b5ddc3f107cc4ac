"""Route handlers. Each takes the request context (plus path params) and returns a Response."""
