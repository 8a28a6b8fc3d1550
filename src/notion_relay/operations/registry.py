"""Name -> operation lookup for every callable unit the service exposes."""

from notion_relay.operations import blocks, comments, databases, pages, search, users, utility

OPERATIONS = {
    # Pages
    "createPage": pages.create_page,
    "getPage": pages.get_page,
    "updatePage": pages.update_page,
    "deletePage": pages.delete_page,
    # Databases
    "queryDatabase": databases.query_database,
    "createDatabase": databases.create_database,
    "updateDatabase": databases.update_database,
    "getDatabaseSchema": databases.get_database_schema,
    # Content
    "appendBlockChildren": blocks.append_block_children,
    "updateBlock": blocks.update_block,
    "deleteBlock": blocks.delete_block,
    "getBlockChildren": blocks.get_block_children,
    # Search
    "search": search.search,
    "listDatabases": search.list_databases,
    # Comments
    "createComment": comments.create_comment,
    "getComments": comments.get_comments,
    # Users
    "getUser": users.get_user,
    "listUsers": users.list_users,
    "getBotUser": users.get_bot_user,
    # Utility
    "formatRichText": utility.format_rich_text_op,
    "parseProperties": utility.parse_properties,
}
