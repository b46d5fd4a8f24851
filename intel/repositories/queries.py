"""
GraphQL documents for the defi.space indexer.
"""

GET_POOL_INFO = """
query GetPoolInfo($address: String!) {
  pair(where: { address: { _eq: $address } }) {
    address
    factoryAddress
    token0Address
    token1Address
    reserve0
    reserve1
    totalSupply
    tvlUsd
    volume24h
    apy24h
  }
}
"""

GET_REACTOR_INFO = """
query GetReactorInfo($address: String!) {
  reactor(where: { address: { _eq: $address } }) {
    address
    powerplantAddress
    lpTokenAddress
    totalStaked
    activeRewards
    penaltyDuration
    multiplier
    withdrawPenalty
    rewardEvents(order_by: { createdAt: desc }, limit: 1) {
      rewardToken
      rewardAmount
      rewardDuration
      rewardRate
      periodFinish
    }
  }
}
"""

GET_ALL_REACTORS = """
query GetAllReactors {
  reactor {
    address
    reactorIndex
    lpTokenAddress
    totalStaked
    activeRewards
    penaltyDuration
    withdrawPenalty
  }
}
"""

GET_USER_LIQUIDITY_POSITIONS = """
query GetUserLiquidityPositions($userAddress: String!) {
  liquidityPosition(where: { userAddress: { _eq: $userAddress } }) {
    id
    pairAddress
    userAddress
    liquidity
    depositsToken0
    depositsToken1
    withdrawalsToken0
    withdrawalsToken1
    usdValue
    apyEarned
    pair {
      token0Address
      token1Address
      reserve0
      reserve1
      totalSupply
      tvlUsd
    }
  }
}
"""

GET_USER_STAKE_POSITIONS = """
query GetUserStakePositions($userAddress: String!) {
  userStake(where: { userAddress: { _eq: $userAddress } }) {
    id
    reactorAddress
    userAddress
    stakedAmount
    rewards
    penaltyEndTime
    rewardPerTokenPaid
    reactor {
      lpTokenAddress
      totalStaked
      activeRewards
      penaltyDuration
      withdrawPenalty
    }
  }
}
"""

GET_REACTOR_INDEX_BY_LP_TOKEN = """
query GetReactorIndexByLpToken($lpTokenAddress: String!) {
  reactor(where: { lpTokenAddress: { _eq: $lpTokenAddress } }) {
    reactorIndex
  }
}
"""
