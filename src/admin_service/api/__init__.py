"""HTTP layer: app factory, middleware, routes and schemas."""
