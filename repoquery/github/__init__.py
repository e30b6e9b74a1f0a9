"""GitHub GraphQL scalar functions and paginated row iterators."""