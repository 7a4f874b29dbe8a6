from fxbench.app import main

main()
