"""Constants for the Hacker News content source."""

HN_API_BASE_URL = "https://hacker-news.firebaseio.com/v0"
HN_TOP_STORIES_PATH = "/topstories.json"
HN_ITEM_PATH = "/item/{item_id}.json"

# Discussion host; items without an external link live here
HN_SITE_HOST = "news.ycombinator.com"
HN_ITEM_URL_TEMPLATE = "https://news.ycombinator.com/item?id={item_id}"

# Number of top story ids inspected per run
DEFAULT_CANDIDATE_LIMIT = 100
