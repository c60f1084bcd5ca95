"""Qt front end for browsing INL data folders and plotting selected variables."""
