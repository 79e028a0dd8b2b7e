# Application routes are versioned under v1/; the metrics scrape route is not
