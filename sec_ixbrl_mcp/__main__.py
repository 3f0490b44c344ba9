from sec_ixbrl_mcp.server import main

main()
